"""Passkey ceremony schemas for validation."""
from marshmallow import INCLUDE, Schema, ValidationError, fields, validate, validates_schema


class PublicKeyCredentialSchema(Schema):
    """Schema for a serialized PublicKeyCredential sent by the browser.

    Fields this schema does not declare, such as clientExtensionResults, are
    passed through untouched to the passkey provider.
    """

    required_response_fields = ()

    class Meta:
        unknown = INCLUDE

    id = fields.Str(required=True, validate=validate.Length(min=1))
    rawId = fields.Str(required=True, validate=validate.Length(min=1))
    type = fields.Str(
        required=True,
        validate=validate.OneOf(["public-key"]),
    )
    response = fields.Dict(required=True)

    @validates_schema
    def validate_response(self, data, **kwargs):
        """Validate response contains required fields."""
        response = data.get("response", {})
        for field in self.required_response_fields:
            if field not in response:
                raise ValidationError(
                    f"Missing required field in response: {field}",
                    field_name=f"response.{field}",
                )


class RegistrationCredentialSchema(PublicKeyCredentialSchema):
    """Schema for an attestation produced by navigator.credentials.create()."""

    required_response_fields = ("attestationObject", "clientDataJSON")


class AuthenticationCredentialSchema(PublicKeyCredentialSchema):
    """Schema for an assertion produced by navigator.credentials.get()."""

    required_response_fields = ("authenticatorData", "clientDataJSON", "signature")


class RegisterFinishSchema(Schema):
    """Schema for completing passkey registration."""

    name = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=100),
    )
    credential = fields.Nested(RegistrationCredentialSchema, required=True)


class CredentialRenameSchema(Schema):
    """Schema for renaming a passkey."""

    name = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=100),
    )
