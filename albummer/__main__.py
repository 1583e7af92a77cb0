"""Package entry point for ``python -m albummer``.

WHY: Users run the compiler as ``python -m albummer generate trip.alb``
without installing a console script.

HOW: Delegates straight to the CLI's main() function.
"""

from albummer.cli import main

if __name__ == "__main__":
    main()
