#!/usr/bin/env python3
"""
Generate a bcrypt password hash.
Usage: python scripts/hash_password.py <password>
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.auth import hash_password


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/hash_password.py <password>")
        sys.exit(1)

    password = sys.argv[1]
    hashed = hash_password(password)

    print(f"\n{hashed}\n")


if __name__ == "__main__":
    main()
