#!/usr/bin/env python3
"""
lambda-scaffold: scaffold an AWS Lambda project and manage its deployment.

- init, configure: create a project and its lambda_config.json
- create, update, update-config, update-code, delete: manage the function
- invoke, invoke-local, logs: run it and watch it

This script supports running directly from a source checkout that uses a
src/ layout. It adds the local `src/` directory to sys.path before importing
the CLI. For regular use, prefer installing the project and using the
`lambda-scaffold` console script.
"""

import os
import sys

# Add src/ to path to import modules directly
REPO_ROOT = os.path.dirname(os.path.abspath(__file__))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from cli import main

if __name__ == "__main__":
    sys.exit(main())
