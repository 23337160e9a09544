"""
Couche domaine (core).

Contient les entités du cache, les ports (interfaces abstraites), les objets
valeur et les exceptions métier.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités persistées (CacheEntry, LibraryEntry, RecycleRecord)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
- value_objects/ : Objets valeur immutables (FileFacts, ClassificationResult)
"""
