# worker.py
from prefect import serve
from dashboard_api.flows import run_seed_pipeline

if __name__ == "__main__":
    # Seeds an empty database from SEED_SOURCE_URL. Trigger it manually,
    # or pass skip_if_populated=False to append the source again.
    seed_deployment = run_seed_pipeline.to_deployment(
        name="seed-transactions",
        tags=["seed", "manual"],
        description="Fetches the product source and loads it into the transactions table."
    )

    serve(seed_deployment, limit=1, pause_on_shutdown=False)
