"""
Classification des fichiers d'un repertoire.

- video : arbre de decision de la video principale
- text : NFO et sous-titres verifies par le contenu
- image : echelle de confiance sur les noms attendus
- audio : theme musical
- legacy : repertoires historiques
- classifier : assemblage et decision
"""

from mediavault.services.classification.classifier import DirectoryClassifier

__all__ = ["DirectoryClassifier"]
