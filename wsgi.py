"""WSGI entry point for the application."""
from dotenv import load_dotenv, find_dotenv

# Load environment variables from .env file FIRST, before any imports
load_dotenv(find_dotenv())

import os
from passgate import create_app

# Create application instance
application = create_app(os.getenv("FLASK_ENV", "production"))

app = application

if __name__ == "__main__":
    app.run()
