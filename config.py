import os
import secrets

# GitHub OAuth Configuration
CLIENT_ID = os.getenv('GITHUB_CLIENT_ID', '')
CLIENT_SECRET = os.getenv('GITHUB_CLIENT_SECRET', '')

# Must match the callback URL registered on the GitHub OAuth app
REDIRECT_URI = os.getenv('REDIRECT_URI', 'http://localhost:8000/callback')

# Base URL of the trusted backend serving POST /github/oauth
API_BASE = os.getenv('API_BASE', 'http://localhost:8000').rstrip('/')

SESSION_SECRET = os.getenv('SESSION_SECRET') or CLIENT_SECRET or secrets.token_urlsafe(32)

# Seconds; applied to every outbound HTTP call
REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', '30'))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',')
    if origin.strip()
]

# GitHub OAuth URLs
AUTHORIZE_URL = 'https://github.com/login/oauth/authorize'
TOKEN_URL = 'https://github.com/login/oauth/access_token'
API_URL = 'https://api.github.com'
OAUTH_SCOPE = 'repo user'

GITHUB_API_VERSION = '2022-11-28'
API_VERSION = '1.0.0'

# Carries the browser's address on the internal token exchange call
FORWARDED_FOR_HEADER = 'X-Forwarded-For'
LOOPBACK_HOSTS = ('127.0.0.1', '::1', 'localhost')
