"""Package entry point for ``python -m word_splitter``.

WHY: Users run the splitter as ``python -m word_splitter document.json``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from word_splitter.cli import main

if __name__ == "__main__":
    main()
