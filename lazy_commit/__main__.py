from lazy_commit.cli.main import run

run()
