"""Allow `python -m scripts` by running the exposure report."""

from scripts.run_exposure import main

main()
