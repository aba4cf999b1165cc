from ghcopy.cli import app

app(prog_name="ghcopy")
