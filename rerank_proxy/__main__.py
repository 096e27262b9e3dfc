from rerank_proxy.main import run

run()
