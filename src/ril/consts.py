VERSION = "0.1.0"
APP_NAME = "React Interview Lab"
