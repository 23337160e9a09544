"""
Adaptateurs : implementations concretes des ports du domaine.

- file_system : operations fichiers reelles et tables d'extensions
- parsing : analyse des noms de fichiers et sondes (pymediainfo, Pillow, texte)
- cli : commandes typer
"""
