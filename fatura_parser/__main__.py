from .cli import app

app(prog_name="fatura-parser")
