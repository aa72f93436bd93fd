from gwf.cli import app

app(prog_name="gwf")
