"""
hanki launcher
--------------

Run the interactive Korean vocabulary assistant without installing the package:

    python enhance_deck.py
"""

from hanki.app import run

if __name__ == "__main__":
    run()
