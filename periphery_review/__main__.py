from periphery_review.cli import cli

cli()
