from .cargo import CargoManifest, DependencySpec, PackageSection

__all__ = ["CargoManifest", "DependencySpec", "PackageSection"]
