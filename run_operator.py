#!/usr/bin/env python3
"""
Wrapper script to run the addon operator with Kopf.

Launches Kopf's CLI with all standard arguments after registering the
operator's handlers.

Usage:
    python run_operator.py [any kopf run arguments]

Examples:
    python run_operator.py --verbose --all-namespaces
    python run_operator.py --log-format=json
"""
import sys

if __name__ == '__main__':
    import kopf.cli

    # Import the operator module (which registers handlers via decorators)
    import addon_operator.app  # noqa: F401

    # This makes it behave as if user called: kopf run <args>
    sys.argv.insert(1, 'run')

    sys.exit(kopf.cli.main(prog_name="kopf"))
