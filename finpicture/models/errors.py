class InvalidInputError(ValueError):
    """A value object was built from figures outside the data model."""


class AssetNotFoundError(KeyError):
    pass


class DuplicateAssetError(ValueError):
    pass
