"""The Command Line Interface for the codec, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface): whatever the command line leaves
out is asked for interactively, unless non-interactive mode is on, in which case defaults are used or the
command fails.

Typical usage example:

    rsapem keygen -p key.pub -P key.pem
    rsapem inspect --key key.pem
    python -m rsapem convert --key legacy.pem --output key.pem --format pkcs1
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import base64
import pathlib
import sys
import typing

import rsapem
from rsapem import engine
from rsapem import mapper
from rsapem import pem


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in RSA PEM.",
            choices=["keygen", "inspect", "convert", "sign", "verify", "encrypt", "decrypt"],
        ),
    "keygen":
        HelpData("Key pair generation utility."),
    "inspect":
        HelpData("Show the format and parameters of a PEM key."),
    "convert":
        HelpData("Re-encode a PEM key in PKCS#1 or PKCS#8."),
    "sign":
        HelpData("Signing utility (SHA-256, PKCS#1 v1.5)."),
    "verify":
        HelpData("Signature verification utility."),
    "encrypt":
        HelpData("Encryption utility (PKCS#1 v1.5)."),
    "decrypt":
        HelpData("Decryption utility (PKCS#1 v1.5)."),
    "public_key":
        HelpData(
            description="Location of the public key file.",
            format=pathlib.Path,
        ),
    "private_key":
        HelpData(
            description="Location of the private key file.",
            format=pathlib.Path,
        ),
    "key":
        HelpData(
            description="Location of a public or private key file.",
            format=pathlib.Path,
        ),
    "output":
        HelpData(
            description="Destination of the converted key file.",
            format=pathlib.Path,
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "encoding":
        HelpData(description="Payload encoding.", choices=["utf-8", "utf-16", "ascii"], advanced=True, default="utf-8"),
    "format":
        HelpData(
            description="Key encoding to write.",
            choices=list(mapper.PEM_LABELS),
            advanced=True,
            default="pkcs1",
        ),
    "keysize":
        HelpData(
            description="Key size (in bits).",
            choices=[str(size) for size in engine.KEY_SIZES],
            default="2048",
        ),
    "pub_exponent":
        HelpData(
            description="Exponent for the public key.",
            format=int,
            advanced=True,
            default=65537,
        ),
    "strict":
        HelpData(
            description="Reject PEM files whose BEGIN and END markers do not match.",
            format=bool,
            advanced=True,
            default=False,
        ),
    "signature":
        HelpData(
            description="The base64 signature to validate against the payload and public key.",
            format=str,
        ),
    "overwrite":
        HelpData(
            description="Overwrite specified destination files if they exist?",
            choices=["Y", "N"],
            default="N",
        )
}

needs = {
    "keygen": ("public_key", "private_key", "keysize", "pub_exponent", "format"),
    "inspect": ("key", "strict"),
    "convert": ("key", "output", "format", "strict"),
    "sign": ("private_key", "message", "strict"),
    "verify": ("public_key", "message", "signature", "strict"),
    "encrypt": ("public_key", "message", "encoding", "strict"),
    "decrypt": ("private_key", "message", "encoding", "strict"),
}

key_files = ("public_key", "private_key", "key")

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=help_dict["public_key"].format, help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key",
                     "-P",
                     type=help_dict["private_key"].format,
                     help=help_dict["private_key"].description)
anykey = argparse.ArgumentParser(add_help=False)
anykey.add_argument("--key", "-k", type=help_dict["key"].format, help=help_dict["key"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", type=help_dict["message"].format, help=help_dict["message"].description)
encp = argparse.ArgumentParser(add_help=False)
encp.add_argument("--encoding", "-e", choices=help_dict["encoding"].choices, help=help_dict["encoding"].description)
fmtp = argparse.ArgumentParser(add_help=False)
fmtp.add_argument("--format", "-f", choices=help_dict["format"].choices, help=help_dict["format"].description)
strictp = argparse.ArgumentParser(add_help=False)
strictp.add_argument("--strict", "-s", action="store_const", const=True, help=help_dict["strict"].description)
corep = argparse.ArgumentParser(prog="rsapem")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsapem.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen = commands.add_parser("keygen", parents=[privkey, pubkey, fmtp], help=help_dict["keygen"].description)
keygen.add_argument("--keysize", choices=help_dict["keysize"].choices, help=help_dict["keysize"].description)
keygen.add_argument("--pub-exponent", type=help_dict["pub_exponent"].format, help=help_dict["pub_exponent"].description)
keygen.add_argument("--overwrite", "-o", action="store_const", const="Y", help=help_dict["overwrite"].description)

inspect = commands.add_parser("inspect", parents=[anykey, strictp], help=help_dict["inspect"].description)
convert = commands.add_parser("convert", parents=[anykey, fmtp, strictp], help=help_dict["convert"].description)
convert.add_argument("--output", "-O", type=help_dict["output"].format, help=help_dict["output"].description)
convert.add_argument("--overwrite", "-o", action="store_const", const="Y", help=help_dict["overwrite"].description)

sign = commands.add_parser("sign", parents=[privkey, payloads, strictp], help=help_dict["sign"].description)
verify = commands.add_parser("verify", parents=[pubkey, payloads, strictp], help=help_dict["verify"].description)
verify.add_argument("--signature", "-S", type=help_dict["signature"].format, help=help_dict["signature"].description)
encrypt = commands.add_parser("encrypt",
                              parents=[pubkey, payloads, encp, strictp],
                              help=help_dict["encrypt"].description)
decrypt = commands.add_parser("decrypt",
                              parents=[privkey, payloads, encp, strictp],
                              help=help_dict["decrypt"].description)


def preset(arg: str, mode: tuple[bool, bool]):
    """The value used without asking, or None if the user has to be asked.

    Non-interactive mode takes every default, and basic interactive mode takes the defaults of advanced options.

    Raises:
        IOError: If the value is needed, has no default and non-interactive mode is active.
    """
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default is not None:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return None


def option_line(arg: str, choice: str, default) -> str:
    """One entry of a choice list, naming what the choice means for the key files."""
    if arg == "format":
        pub_label, priv_label = mapper.PEM_LABELS[choice]
        text = f"{choice} - writes {pub_label} / {priv_label}"
    elif choice in help_dict:
        text = f"{choice} - {help_dict[choice].description}"
    else:
        text = choice
    return text + (" (Default)" if choice == default else "")


def parse_answer(arg: str, answer: str, existing: bool):
    """Turns a typed answer into the argument's value.

    Raises:
        ValueError: If the answer is not acceptable for the argument.
    """
    helper_data = help_dict[arg]
    if helper_data.choices is not None:
        if answer not in helper_data.choices:
            raise ValueError("Please select an option from the list.")
        return answer
    if helper_data.format is bool:
        if answer.lower() not in ("y", "n", "yes", "no"):
            raise ValueError("Please answer Y or N.")
        return answer.lower() in ("y", "yes")
    try:
        value = helper_data.format(answer)
    except ValueError as exc:
        raise ValueError(f"We could not convert your value to {helper_data.format.__name__}.") from exc
    if existing and not value.is_file():
        raise ValueError(f"No such key file: {value}")
    return value


def ask(arg: str, mode: tuple[bool, bool], existing: bool = False, prntr: typing.Callable = print):
    """Fills in a missing argument, from its default or by asking.

    Args:
        arg: The argument name, a key of `help_dict`.
        mode: The (non-interactive, advanced) flags.
        existing: The argument names a key file that has to exist already.
        prntr: Output function for the prompts.

    Returns:
        The value of the argument.
    """
    value = preset(arg, mode)
    if value is not None:
        return value
    helper_data = help_dict[arg]
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    for choice in helper_data.choices or ():
        prntr(option_line(arg, choice, helper_data.default))
    if helper_data.format is bool:
        prntr("Answer Y or N.")
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        answer = input(f"{arg}: ").strip()
        if not answer and helper_data.default is not None:
            return helper_data.default
        if not answer:
            prntr("Please provide a value.")
            continue
        try:
            return parse_answer(arg, answer, existing)
        except ValueError as exc:
            prntr(str(exc))


def read_message(value: str, encoding: str) -> str:
    """The message itself, or the contents of the file it names with a `P:` prefix."""
    if value.startswith("P:"):
        with open(value[2:], "r", encoding=encoding) as f:
            return f.read()
    return value


def load_key(file: pathlib.Path,
             strict: bool = False) -> tuple[str | None, rsapem.RsaPublicKey | rsapem.RsaPrivateKey]:
    """Reads a key file, deciding between public and private by its PEM label."""
    block = pem.read_pem(file, strict)
    if block.label is not None and "PRIVATE" in block.label:
        return block.label, mapper.decode_private(block.body)
    return block.label, mapper.decode_public(block.body)


def describe(key: rsapem.RsaPublicKey | rsapem.RsaPrivateKey, label: str | None) -> list[str]:
    """Human-readable summary of a key."""
    lines = [f"PEM label: {label or 'none'}", f"Key size: {key.size} bits", f"Modulus: {key.modulus:#x}"]
    if isinstance(key, rsapem.RsaPrivateKey):
        lines.append(f"Public exponent: {key.public_exponent}")
        lines.append(f"Private exponent: {key.private_exponent:#x}")
        lines.append(f"Prime 1: {key.p:#x}")
        lines.append(f"Prime 2: {key.q:#x}")
        lines.append(f"Exponent 1: {key.dp:#x}")
        lines.append(f"Exponent 2: {key.dq:#x}")
        lines.append(f"Coefficient: {key.qinv:#x}")
    else:
        lines.append(f"Public exponent: {key.exponent}")
    return lines


def confirm_overwrite(args, pstatus: tuple[bool, bool], pspr: typing.Callable, *targets: pathlib.Path) -> bool:
    if not any(target.exists() for target in targets):
        return True
    rs = getattr(args, "overwrite", None)
    if rs is None:
        rs = ask("overwrite", pstatus, prntr=pspr)
    return rs == "Y"


def main():
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args()
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to RSA PEM!\n")
    if not args.subcommand:
        args.subcommand = ask("subcommand", pstatus)
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            existing = reqs in key_files and args.subcommand != "keygen"
            setattr(args, reqs, ask(reqs, pstatus, existing))
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    match args.subcommand:
        case "keygen":
            if not confirm_overwrite(args, pstatus, pspr, args.private_key, args.public_key):
                print("Destination private or public key already exists!")
                return
            pub, priv = engine.generate_key_pair(int(args.keysize), args.pub_exponent)
            pem.write_pem(args.private_key, *mapper.encode_private(priv, args.format))
            pem.write_pem(args.public_key, *mapper.encode_public(pub, args.format))
            pspr("\nKey pair generated!")
        case "inspect":
            label, key = load_key(args.key, args.strict)
            for line in describe(key, label):
                print(line)
        case "convert":
            if not confirm_overwrite(args, pstatus, pspr, args.output):
                print("Destination key already exists!")
                return
            _, key = load_key(args.key, args.strict)
            if isinstance(key, rsapem.RsaPrivateKey):
                pem.write_pem(args.output, *mapper.encode_private(key, args.format))
            else:
                pem.write_pem(args.output, *mapper.encode_public(key, args.format))
            pspr(f"\nKey written to {args.output}!")
        case "sign":
            args.message = read_message(args.message, "utf-8")
            rpk = mapper.decode_private(pem.read_pem(args.private_key, args.strict).body)
            signature = rsapem.sign(args.message, rpk)
            pspr("Signature:")
            print(signature)
        case "verify":
            args.message = read_message(args.message, "utf-8")
            rpu = mapper.decode_public(pem.read_pem(args.public_key, args.strict).body)
            if rsapem.verify(args.message, args.signature, rpu):
                pspr("Signature Verified!")
            else:
                print("Signature Verification Failed!")
                sys.exit(1)
        case "encrypt":
            args.message = read_message(args.message, args.encoding)
            rpu = mapper.decode_public(pem.read_pem(args.public_key, args.strict).body)
            ciph = rsapem.encrypt(args.message.encode(args.encoding), rpu)
            pspr("Ciphertext:")
            print(base64.b64encode(ciph).decode("ascii"))
        case "decrypt":
            args.message = read_message(args.message, "ascii")
            rpk = mapper.decode_private(pem.read_pem(args.private_key, args.strict).body)
            clear = rsapem.decrypt(base64.b64decode(args.message), rpk)
            pspr("Cleartext:")
            print(clear.decode(args.encoding))
    pspr("Thank you for using RSA PEM!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
