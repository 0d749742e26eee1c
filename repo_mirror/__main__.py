"""Allow running as: python -m repo_mirror"""

from .main import main

main()
