# Licensed under the GPLv3 - see LICENSE
"""Show versions of cifio and its dependencies in the pytest header."""
try:
    from pytest_astropy_header.display import (PYTEST_HEADER_MODULES,
                                               TESTED_VERSIONS)
except ImportError:
    pass
else:
    def pytest_configure(config):
        config.option.astropy_header = True

        PYTEST_HEADER_MODULES.clear()
        PYTEST_HEADER_MODULES.update(Numpy='numpy', Astropy='astropy',
                                     Entrypoints='entrypoints',
                                     Click='click')

        try:
            from .version import version
        except ImportError:  # Not installed, e.g., a bare source checkout.
            version = 'unknown'
        TESTED_VERSIONS['cifio'] = version
