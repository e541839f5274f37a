pytest_plugins = ["docapi.testing"]
