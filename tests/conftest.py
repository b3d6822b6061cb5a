pytest_plugins = ["pytester", "regtest.plugin"]
