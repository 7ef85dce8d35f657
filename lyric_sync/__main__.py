"""Package entry point for ``python -m lyric_sync``.

WHY: Users run the converter as ``python -m lyric_sync song.lrc``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

if __name__ == "__main__":
    from lyric_sync.cli import main
    main()
