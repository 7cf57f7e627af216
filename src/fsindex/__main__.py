from fsindex.cli import app

app(prog_name="fsindex")
