"""Passkey management endpoints."""
from fido2.utils import websafe_decode
from flask import g, request

from passgate.api import api_bp
from passgate.exceptions.validation_exceptions import CredentialNotFoundError
from passgate.schemas.passkey_schema import CredentialRenameSchema
from passgate.services.audit_service import AuditService
from passgate.services.credential_service import CredentialRepository
from passgate.utils.constants import AuditAction
from passgate.utils.decorators import login_required, remote_user_required
from passgate.utils.response import api_response


def _decode_credential_id(encoded_id):
    try:
        return websafe_decode(encoded_id)
    except ValueError:
        raise CredentialNotFoundError()


@api_bp.route("/credentials", methods=["GET"])
@remote_user_required
@login_required
def list_credentials():
    """
    List the passkeys of the asserted user.

    Returns:
        200: List of {id, name}
        401: Missing identity header or session not logged in
    """
    return api_response(
        data=CredentialRepository.list_credentials(g.remote_user),
        message="Passkeys retrieved successfully",
    )


@api_bp.route("/credentials/<credential_id>", methods=["PATCH"])
@remote_user_required
@login_required
def rename_credential(credential_id):
    """
    Rename a passkey.

    Request body:
        name: New label

    Returns:
        200: Passkey renamed
        400: Validation error
        404: Passkey not found
    """
    schema = CredentialRenameSchema()
    data = schema.load(request.get_json(silent=True))

    credential = CredentialRepository.rename_credential(
        _decode_credential_id(credential_id),
        g.remote_user,
        data["name"],
    )

    AuditService.log_action(
        action=AuditAction.WEBAUTHN_CREDENTIAL_RENAMED,
        username=g.remote_user,
        user_id=credential.user_id,
        resource_type="credential",
        resource_id=credential.id,
        metadata={"name": credential.name},
        description=f"Passkey renamed to '{credential.name}'",
    )

    return api_response(
        data={"credential": credential.to_public_dict()},
        message="Passkey renamed successfully",
    )


@api_bp.route("/credentials/<credential_id>", methods=["DELETE"])
@remote_user_required
@login_required
def delete_credential(credential_id):
    """
    Revoke a passkey.

    Deleting a passkey that does not exist succeeds as well.

    Returns:
        204: Passkey removed
    """
    try:
        removed = CredentialRepository.delete_credential(
            _decode_credential_id(credential_id),
            username=g.remote_user,
        )
    except CredentialNotFoundError:
        return api_response(status=204)

    AuditService.log_action(
        action=AuditAction.WEBAUTHN_CREDENTIAL_DELETED,
        username=g.remote_user,
        user_id=removed["user_id"],
        resource_type="credential",
        resource_id=removed["id"],
        description=f"Passkey '{removed['name']}' removed",
    )
    return api_response(status=204)
