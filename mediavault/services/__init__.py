"""
Services applicatifs (cas d'utilisation).

- fact_gathering / directory_context / disc_detector : collecte des faits
- classification / decision / scan : classification et decision de traitement
- cache_store / publisher / recycler / ingest : cache, publication et corbeille

Les services dependent des ports de core/, jamais des adapters concrets,
a l'exception des fonctions pures d'analyse (noms de fichiers, hash).
"""
