from typing import Dict, List, Optional
from pydantic import BaseModel


class EcosystemInfo(BaseModel):
    name: str
    ecosystem: str
    language: str
    default_package_manager: str


class EcosystemMapper:
    """
    Maps SBOM plugins to the package ecosystem they analyse.

    To support a new language, add its plugin name to _plugins.
    """

    _plugins: Dict[str, EcosystemInfo] = {
        "js-sbom": EcosystemInfo(name="npm Registry", ecosystem="npm", language="JavaScript", default_package_manager="npm"),
        "php-sbom": EcosystemInfo(name="Packagist", ecosystem="packagist", language="PHP", default_package_manager="composer"),
        "python-sbom": EcosystemInfo(name="PyPI", ecosystem="pypi", language="Python", default_package_manager="pip"),
        "rust-sbom": EcosystemInfo(name="crates.io", ecosystem="cargo", language="Rust", default_package_manager="cargo"),
        "java-sbom": EcosystemInfo(name="Maven Central", ecosystem="maven", language="Java", default_package_manager="maven"),
        "dotnet-sbom": EcosystemInfo(name="NuGet", ecosystem="nuget", language="C#", default_package_manager="dotnet"),
        "go-sbom": EcosystemInfo(name="Go Modules", ecosystem="go", language="Go", default_package_manager="go"),
        "ruby-sbom": EcosystemInfo(name="RubyGems", ecosystem="rubygems", language="Ruby", default_package_manager="gem"),
    }

    @classmethod
    def get_ecosystem_info(cls, plugin: str) -> Optional[EcosystemInfo]:
        return cls._plugins.get(plugin)

    @classmethod
    def get_supported_sbom_plugins(cls) -> List[str]:
        return list(cls._plugins.keys())

    @classmethod
    def is_valid_ecosystem(cls, ecosystem: str) -> bool:
        return any(info.ecosystem == ecosystem for info in cls._plugins.values())
