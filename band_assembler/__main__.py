"""Entry point wrapper for ``python -m band_assembler``.

Execution is forwarded to :func:`band_assembler.main` so ``python -m
band_assembler`` and the installed ``band-assembler`` console script behave
identically.

Example
-------
::

    python -m band_assembler solve A3 G5 C4 C5
"""

from . import main

if __name__ == "__main__":
    main()
