from jobsheet_extraction.cli import app

app(prog_name="jobsheet-extract")
