"""Allow ``python -m vectorauth``."""

from vectorauth.app import main

main()
