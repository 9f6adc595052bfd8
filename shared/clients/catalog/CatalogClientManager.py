from shared.helper.HelperConfig import HelperConfig
from shared.clients.catalog.CatalogClientInterface import CatalogClientInterface

class CatalogClientManager:
    """
    Manager class to handle the catalog client based on configuration.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """
        Reads the catalog engine from ENV configuration.

        Returns:
            str: The name of the catalog engine, capitalized. Defaults to "Shreddr".
        """
        engine = self.helper_config.get_string_val("CATALOG_ENGINE", default="shreddr")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> CatalogClientInterface:
        """
        Initializes the catalog client based on the engine specified in the configuration.

        Returns:
            CatalogClientInterface: An instance of the catalog client for the configured engine.

        Raises:
            ValueError: If the engine is unknown or its client cannot be instantiated.
        """
        engine = self._get_engine_from_env()
        className = f"CatalogClient{engine}"
        try:
            module = __import__(
                f"shared.clients.catalog.{engine.lower()}.{className}",
                fromlist=[className],
            )
            client_class = getattr(module, className)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported catalog engine specified: '{engine}'. Error: {e}")
        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated catalog client for engine: %s", engine)
        return client

    def get_client(self) -> CatalogClientInterface:
        """
        Returns the instantiated catalog client.
        """
        return self.client
