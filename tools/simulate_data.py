import requests
import json
import time
import argparse
from src.logger import get_logger

logger = get_logger(__name__)

def run_simulation(file_path: str, endpoint_url: str, user_id: str = None, interval: float = 1.0):
    """
    Reads sample vitals from a file and submits each one for a breath analysis.
    """
    try:
        # Open the JSON file and load the sample vitals
        with open(file_path, 'r') as f:
            sample_data = json.load(f)
    except FileNotFoundError:
        logger.error(f"Error: The file '{file_path}' was not found.")
        return
    except json.JSONDecodeError:
        logger.error(f"Error: Could not decode JSON from '{file_path}'.")
        return

    logger.info(f"--- Starting vitals simulation ---")
    logger.info(f"Target endpoint: {endpoint_url}\n")

    for i, record in enumerate(sample_data):
        payload = dict(record)
        if user_id:
            payload["userId"] = user_id
        try:
            logger.info(f"Sending record {i+1}: {payload['healthData']}")
            response = requests.post(endpoint_url, json=payload, timeout=30)

            # Invalid vitals come back as 400 and are reported, not fatal
            if response.status_code == 400:
                logger.warning(f"-> Rejected record {i+1}: {response.json().get('detail')}")
                continue
            response.raise_for_status()

            analysis = response.json()["analysis"]
            logger.info(f"-> Score {analysis['score']}: {analysis['summary']}")
            logger.info(f"   Risk factors: {analysis['riskFactors']}")

        except requests.exceptions.RequestException as e:
            logger.error(f"!! Failed to send data for record {i+1}: {e}")

        logger.info("-" * 20)
        time.sleep(interval)

    logger.info("--- Simulation finished ---")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Replay sample vitals against the breath analysis endpoint.")

    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Run the script in simulation mode."
    )
    parser.add_argument("--endpoint", default="http://127.0.0.1:8000/breath-analysis")
    parser.add_argument("--data", default="tools/sample_vitals.json")
    parser.add_argument("--user-id", default=None, help="Archive the analyses under this user id.")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between submissions.")

    args = parser.parse_args()

    if args.simulate:
        run_simulation(args.data, args.endpoint, user_id=args.user_id, interval=args.interval)
    else:
        logger.info("To run the simulation, use the --simulate flag.")
        logger.info("Example: python -m tools.simulate_data --simulate --user-id demo")
