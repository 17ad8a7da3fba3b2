"""Allow running as `python -m skillset.cli`."""

import skillset.cli.main as main

main.main()
