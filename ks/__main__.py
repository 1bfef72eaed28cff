from ks.cli import run

run()
