from cupcake_store.main import run

run()
