"""
Cle du cache des sondes video.

Une analyse mediainfo est couteuse ; son resultat est memorise sous une cle
calculee sans lire tout le fichier : XXH3-64 du premier et du dernier Mo,
de la taille et de la date de modification (ns). Un fichier remplace ou
retouche change de cle et sera re-sonde.

Cette cle ne sert jamais a l'integrite du cache d'assets : celle-ci repose
sur le SHA-256 complet (FileSystemAdapter.calculate_hash).
"""

from pathlib import Path

import xxhash

SAMPLE_SIZE = 1024 * 1024


def probe_cache_key(file_path: Path, sample_size: int = SAMPLE_SIZE) -> str:
    """
    Calcule la cle de cache de sonde d'un fichier video.

    La fin du fichier n'est lue qu'au-dela du premier echantillon, sans
    relire d'octets deja pris en compte.

    Raises :
        OSError : fichier absent ou illisible
    """
    stat = file_path.stat()
    hasher = xxhash.xxh3_64()

    with open(file_path, "rb") as f:
        hasher.update(f.read(sample_size))
        if stat.st_size > sample_size:
            f.seek(max(stat.st_size - sample_size, sample_size))
            hasher.update(f.read(sample_size))

    hasher.update(f"{stat.st_size}:{stat.st_mtime_ns}".encode())
    return hasher.hexdigest()
