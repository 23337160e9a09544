"""
Table des types d'images et de leurs contraintes.

Pour chaque type : les jetons reconnus dans les noms de fichiers, les noms
generiques acceptes, les extensions autorisees, et la plage de ratio et les
dimensions minimales utilisees pour valider une correspondance par mot-cle.
"""

from dataclasses import dataclass

from mediavault.core.value_objects import AssetKind, ImageFacts

# Tolerance appliquee aux dimensions minimales
DIMENSION_TOLERANCE = 0.9

_PHOTO_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})
_PNG_ONLY = frozenset({".png"})


@dataclass(frozen=True)
class AssetSpec:
    """
    Contraintes d'un type d'image.

    Attributs :
        kind : Type d'asset
        tokens : Jetons de nom ; le premier est le nom canonique publie
        generic_names : Noms generiques reconnus (confiance 80)
        extensions : Extensions autorisees
        min_ratio : Ratio largeur/hauteur minimal
        max_ratio : Ratio largeur/hauteur maximal
        min_width : Largeur minimale (avant tolerance)
        min_height : Hauteur minimale (avant tolerance)
    """

    kind: AssetKind
    tokens: tuple[str, ...]
    generic_names: frozenset[str]
    extensions: frozenset[str]
    min_ratio: float
    max_ratio: float
    min_width: int
    min_height: int

    def accepts_extension(self, extension: str) -> bool:
        return extension.lower() in self.extensions

    def dimensions_match(self, image: ImageFacts | None) -> bool:
        """Verifie ratio et dimensions minimales (avec 10% de tolerance)."""
        if image is None or not image.height:
            return False
        ratio_ok = self.min_ratio <= image.aspect_ratio <= self.max_ratio
        size_ok = (
            image.width >= self.min_width * DIMENSION_TOLERANCE
            and image.height >= self.min_height * DIMENSION_TOLERANCE
        )
        return ratio_ok and size_ok


# Ordre de priorite fixe : un fichier est attribue au premier type atteignant le seuil
ASSET_SPECS: tuple[AssetSpec, ...] = (
    AssetSpec(
        kind=AssetKind.POSTER,
        tokens=("poster",),
        generic_names=frozenset({"poster.jpg", "poster.png", "folder.jpg"}),
        extensions=_PHOTO_EXTENSIONS,
        min_ratio=0.65, max_ratio=0.72, min_width=500, min_height=700,
    ),
    AssetSpec(
        kind=AssetKind.FANART,
        tokens=("fanart", "backdrop"),
        generic_names=frozenset({"fanart.jpg", "fanart.png", "backdrop.jpg"}),
        extensions=_PHOTO_EXTENSIONS,
        min_ratio=1.7, max_ratio=1.85, min_width=1280, min_height=720,
    ),
    AssetSpec(
        kind=AssetKind.BANNER,
        tokens=("banner",),
        generic_names=frozenset({"banner.jpg", "banner.png"}),
        extensions=_PHOTO_EXTENSIONS,
        min_ratio=4.5, max_ratio=6.0, min_width=758, min_height=140,
    ),
    AssetSpec(
        kind=AssetKind.CLEARLOGO,
        tokens=("clearlogo", "logo"),
        generic_names=frozenset({"clearlogo.png", "logo.png"}),
        extensions=_PNG_ONLY,
        min_ratio=1.5, max_ratio=4.0, min_width=400, min_height=100,
    ),
    AssetSpec(
        kind=AssetKind.CLEARART,
        tokens=("clearart",),
        generic_names=frozenset({"clearart.png"}),
        extensions=_PNG_ONLY,
        min_ratio=1.5, max_ratio=3.0, min_width=500, min_height=200,
    ),
    AssetSpec(
        kind=AssetKind.DISCART,
        tokens=("discart", "disc"),
        generic_names=frozenset({"discart.png", "disc.png"}),
        extensions=_PNG_ONLY,
        min_ratio=0.95, max_ratio=1.05, min_width=500, min_height=500,
    ),
    AssetSpec(
        kind=AssetKind.LANDSCAPE,
        tokens=("landscape",),
        generic_names=frozenset({"landscape.jpg", "landscape.png"}),
        extensions=_PHOTO_EXTENSIONS,
        min_ratio=1.7, max_ratio=1.85, min_width=1280, min_height=720,
    ),
    AssetSpec(
        kind=AssetKind.THUMB,
        tokens=("thumb",),
        generic_names=frozenset({"thumb.jpg", "thumb.png"}),
        extensions=_PHOTO_EXTENSIONS,
        min_ratio=1.3, max_ratio=1.5, min_width=400, min_height=300,
    ),
    AssetSpec(
        kind=AssetKind.KEYART,
        tokens=("keyart",),
        generic_names=frozenset({"keyart.jpg", "keyart.png"}),
        extensions=_PHOTO_EXTENSIONS,
        min_ratio=0.65, max_ratio=0.72, min_width=500, min_height=700,
    ),
)

SPECS_BY_KIND: dict[AssetKind, AssetSpec] = {spec.kind: spec for spec in ASSET_SPECS}
