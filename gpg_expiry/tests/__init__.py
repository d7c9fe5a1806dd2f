# Copyright 2020-present Kensho Technologies, LLC.
ALICE_FPR = "A" * 40
ALICE_SUBKEY_FPR = "B" * 40
BOB_FPR = "0123456789ABCDEF0123456789ABCDEF01234567"
BOB_SUBKEY_FPR = "FEDCBA9876543210FEDCBA9876543210FEDCBA98"
CAROL_FPR = "C" * 40

# `gpg --list-public-keys --with-colons --with-fingerprint` for a keyring holding:
#   Alice: primary key expiring at 2000000000, encryption subkey expiring at 1900000000
#   Bob: primary key and encryption subkey without expiration, a revoked and an expired uid
#   Carol: signing-only primary key expiring at 1800000000
KEYRING_LISTING = """\
tru::1:1700000000:2000000000:3:1:5
pub:u:255:22:AAAAAAAAAAAAAAAA:1600000000:2000000000::u:::scESC:::::ed25519:::0:
fpr:::::::::{alice}:
uid:u::::1600000000::1111111111111111111111111111111111111111::Alice <alice@example.com>::::::::::0:
sub:u:255:18:BBBBBBBBBBBBBBBB:1600000000:1900000000:::::e:::::cv25519::
fpr:::::::::{alice_sub}:
pub:f:3072:1:89ABCDEF01234567:1500000000:::f:::scESC:::::::23::0:
fpr:::::::::{bob}:
uid:f::::1500000000::2222222222222222222222222222222222222222::Bob <bob@example.com>::::::::::0:
uid:r::::::3333333333333333333333333333333333333333::Bob <bob@old.example.com>::::::::::0:
uid:e::::1500000000:1550000000:4444444444444444444444444444444444444444::Bob (work) <bob@work.example.com>::::::::::0:
sub:f:3072:1:FEDCBA98:1500000000::::::e::::::23:
fpr:::::::::{bob_sub}:
pub:-:2048:1:CCCCCCCCCCCCCCCC:1400000000:1800000000::-:::sc:::::::23::0:
fpr:::::::::{carol}:
uid:-::::1400000000::5555555555555555555555555555555555555555::Carol <carol@example.com>::::::::::0:
""".format(
    alice=ALICE_FPR,
    alice_sub=ALICE_SUBKEY_FPR,
    bob=BOB_FPR,
    bob_sub=BOB_SUBKEY_FPR,
    carol=CAROL_FPR,
)


def split_listing(listing):
    """Split a listing into the per-key listings `gpg --list-keys FPR` would print"""
    keys = {}
    current = None
    for line in listing.splitlines():
        if line.startswith("pub:"):
            current = []
        if current is None:
            continue
        current.append(line)
        if line.startswith("fpr:") and len(current) == 2:
            keys[line.split(":")[9]] = current
    return keys
