from firebase_admin import auth, credentials, initialize_app
from firebase_admin.exceptions import FirebaseError
from django.conf import settings
import logging
import os
import firebase_admin
import requests

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

# Identity Toolkit error codes that mean the credentials were wrong
INVALID_CREDENTIAL_CODES = ('EMAIL_NOT_FOUND', 'INVALID_PASSWORD', 'INVALID_LOGIN_CREDENTIALS', 'USER_DISABLED')


class IdentityProviderError(Exception):
    """Raised when Firebase rejects or cannot process an identity request"""

    def __init__(self, message, unauthorized=False):
        super().__init__(message)
        self.unauthorized = unauthorized


def initialize_firebase():
    if not firebase_admin._apps:
        cred_path = os.getenv('FIREBASE_CREDENTIALS_PATH')
        if cred_path and os.path.exists(cred_path):
            cred = credentials.Certificate(cred_path)
            initialize_app(cred)
        else:
            # Try to initialize with environment variables
            project_id = os.getenv('FIREBASE_PROJECT_ID')
            if project_id:
                cred_dict = {
                    'type': 'service_account',
                    'project_id': project_id,
                    'private_key_id': os.getenv('FIREBASE_PRIVATE_KEY_ID'),
                    'private_key': os.getenv('FIREBASE_PRIVATE_KEY', '').replace('\\n', '\n'),
                    'client_email': os.getenv('FIREBASE_CLIENT_EMAIL'),
                    'client_id': os.getenv('FIREBASE_CLIENT_ID'),
                    'auth_uri': 'https://accounts.google.com/o/oauth2/auth',
                    'token_uri': 'https://oauth2.googleapis.com/token',
                    'auth_provider_x509_cert_url': 'https://www.googleapis.com/oauth2/v1/certs',
                    'client_x509_cert_url': f'https://www.googleapis.com/robot/v1/metadata/x509/{os.getenv("FIREBASE_CLIENT_EMAIL")}'
                }
                cred = credentials.Certificate(cred_dict)
                initialize_app(cred)
            else:
                initialize_app()


def verify_firebase_token(id_token: str) -> dict:
    """Verify Firebase ID token and extract uid and email"""
    try:
        initialize_firebase()
        decoded_token = auth.verify_id_token(id_token)
    except (FirebaseError, ValueError) as e:
        raise IdentityProviderError(f'Invalid Firebase token: {str(e)}', unauthorized=True)

    return {
        'uid': decoded_token.get('uid'),
        'email': decoded_token.get('email', ''),
        'name': decoded_token.get('name', ''),
    }


def create_firebase_user(email: str, password: str, display_name: str = '') -> str:
    """Create an email/password account. Returns the Firebase uid."""
    try:
        initialize_firebase()
        user = auth.create_user(email=email, password=password, display_name=display_name or None)
    except auth.EmailAlreadyExistsError:
        raise IdentityProviderError('An account with this email already exists')
    except (FirebaseError, ValueError) as e:
        logger.error(f'[FIREBASE] create_user failed for {email}: {e}')
        raise IdentityProviderError(str(e))
    return user.uid


def sign_in_with_password(email: str, password: str) -> dict:
    """Exchange email/password for a Firebase identity via the Identity Toolkit REST API"""
    payload = {
        'email': email,
        'password': password,
        'returnSecureToken': True,
    }

    try:
        response = requests.post(
            SIGN_IN_URL,
            params={'key': settings.FIREBASE_WEB_API_KEY},
            json=payload,
            timeout=10,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        error_msg = str(e)
        if getattr(e, 'response', None) is not None:
            try:
                error_msg = e.response.json().get('error', {}).get('message', error_msg)
            except ValueError:
                pass
        unauthorized = any(error_msg.startswith(code) for code in INVALID_CREDENTIAL_CODES)
        if unauthorized:
            raise IdentityProviderError('Invalid email or password', unauthorized=True)
        raise IdentityProviderError(f'Sign in failed: {error_msg}')

    data = response.json()
    return {
        'uid': data.get('localId'),
        'email': data.get('email', email),
        'id_token': data.get('idToken'),
    }
