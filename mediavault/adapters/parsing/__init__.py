"""
Adaptateurs de parsing et sondes de faits.

- analyze_filename : table ordonnee de regles sur les noms de fichiers
- MediaInfoExtractor : sonde video avec pymediainfo (delai maximal)
- PillowImageProbe : sonde image et hash perceptuel avec Pillow
- TextSampleProbe : sonde texte (NFO, sous-titres)
"""

from mediavault.adapters.parsing.filename_analyzer import analyze_filename
from mediavault.adapters.parsing.image_probe import PillowImageProbe, hamming_distance
from mediavault.adapters.parsing.mediainfo_extractor import MediaInfoExtractor
from mediavault.adapters.parsing.text_probe import TextSampleProbe

__all__ = [
    "analyze_filename",
    "hamming_distance",
    "MediaInfoExtractor",
    "PillowImageProbe",
    "TextSampleProbe",
]
