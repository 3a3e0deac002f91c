from loguru import logger

# keep test output readable; loguru's default sink logs at DEBUG
logger.disable("planeio")
