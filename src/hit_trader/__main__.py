from hit_trader.main import app

app()
