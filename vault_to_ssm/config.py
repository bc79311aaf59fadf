import os
from dotenv import load_dotenv

# Load environment variables from a .env file in the working directory
load_dotenv()

# Vault
VAULT_ADDR = os.environ.get('VAULT_ADDR', 'http://127.0.0.1:8200')
VAULT_TOKEN = os.environ.get('VAULT_TOKEN')
VAULT_NAMESPACE = os.environ.get('VAULT_NAMESPACE')
VAULT_AUTH_METHOD = os.environ.get('VAULT_AUTH_METHOD', 'token')
VAULT_ROLE_ID = os.environ.get('VAULT_ROLE_ID')
VAULT_SECRET_ID = os.environ.get('VAULT_SECRET_ID')
VAULT_KUBERNETES_ROLE = os.environ.get('VAULT_KUBERNETES_ROLE')
VAULT_SKIP_VERIFY = os.environ.get('VAULT_SKIP_VERIFY', '').lower() in ('1', 'true', 'yes')

# AWS Parameter Store
AWS_REGION = os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION')
AWS_PROFILE = os.environ.get('AWS_PROFILE')
SSM_ENDPOINT_URL = os.environ.get('SSM_ENDPOINT_URL')

# --- Walk limits ---
MAX_WALK_DEPTH = int(os.environ.get('VAULT_TO_SSM_MAX_DEPTH', 64))
