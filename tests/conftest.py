pytest_plugins = ["tests.fixtures.b2_fixtures"]
