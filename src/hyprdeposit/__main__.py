"""Entry point for running the API as a module: python -m hyprdeposit"""

from hyprdeposit.main import main

if __name__ == "__main__":
    main()
