from delivery_api.main import run

run()
