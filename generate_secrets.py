#!/usr/bin/env python3
"""
Generate a secure secret for the Jungle Sportsbook
Run this script to generate the required SECRET_KEY
"""

import secrets


def generate_secrets():
    """Generate a secure random session key"""
    print("🔐 Generating secure secret for Jungle Sportsbook...")
    print("=" * 50)

    print(f"SECRET_KEY={secrets.token_urlsafe(32)}")

    print("=" * 50)
    print("📝 Copy this value to your .env file")
    print("⚠️  Keep it secure and never commit it to version control!")


if __name__ == "__main__":
    generate_secrets()
