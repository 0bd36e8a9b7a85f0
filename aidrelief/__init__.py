APP_NAME = "AidRelief"
VERSION = "1.0.0"
