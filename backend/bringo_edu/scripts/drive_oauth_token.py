"""
Google Drive refresh token helper

Step 1: print the consent URL           -> drive-oauth-token auth-url
Step 2: exchange the code from the URL  -> drive-oauth-token exchange CODE

Reads GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and GOOGLE_REDIRECT_URI from the
environment (.env is loaded).
"""
import argparse
import sys
from typing import Dict, Optional
from urllib.parse import urlencode

import requests

from ..core.config import Settings
from ..services.google_drive_service import DRIVE_SCOPES, TOKEN_URI

AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"


def build_auth_url(settings: Settings) -> str:
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.google_redirect_uri,
        "response_type": "code",
        "scope": " ".join(DRIVE_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
    }
    return f"{AUTH_URI}?{urlencode(params)}"


def exchange_code(settings: Settings, code: str) -> Dict:
    """Exchange an authorization code for tokens at Google's token endpoint"""
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": settings.google_client_id,
        "client_secret": settings.google_client_secret,
        "redirect_uri": settings.google_redirect_uri,
    }
    response = requests.post(TOKEN_URI, data=data, timeout=30)
    if response.status_code != 200:
        raise RuntimeError(f"Token exchange failed: {response.status_code} - {response.text}")
    return response.json()


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Obtain a Google Drive refresh token for GOOGLE_REFRESH_TOKEN")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("auth-url", help="Print the Google consent URL")
    exchange = subparsers.add_parser("exchange", help="Exchange an authorization code for a refresh token")
    exchange.add_argument("code", help="Value of ?code= from the redirect URL")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if not settings.google_client_id or not settings.google_client_secret:
        print("❌ GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set")
        return 1

    if args.command == "auth-url":
        print("🌐 STEP 1: Open this URL in your browser:")
        print("\n" + build_auth_url(settings) + "\n")
        print("✅ STEP 2: After authorizing, copy the value after ?code= in the redirect URL")
        print("🚀 STEP 3: Run: drive-oauth-token exchange YOUR_CODE")
        return 0

    try:
        tokens = exchange_code(settings, args.code)
    except (requests.RequestException, RuntimeError) as e:
        print(f"❌ Error obtaining tokens: {e}")
        return 1

    refresh_token = tokens.get("refresh_token")
    if not refresh_token:
        print("⚠️ No refresh_token returned. Revoke the app's access and run auth-url again (prompt=consent).")
        return 1

    print("✅ Add this to the server environment:")
    print(f"GOOGLE_REFRESH_TOKEN={refresh_token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
