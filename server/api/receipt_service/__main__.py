import logging

import uvicorn

from receipt_service import config

def main():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("receipt-service listening on http://%s:%d", config.HOST, config.PORT)
    uvicorn.run("receipt_service.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())

if __name__ == "__main__":
    main()
