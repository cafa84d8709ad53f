"""
Main entry point for the stream_audit package.

Allows running the crawler as: python -m stream_audit
"""

from stream_audit.cli import main

if __name__ == "__main__":
    main()
