from hxserialize import loads


def main() -> None:
    msg = "Don't let the smoke out!"
    # Haxe: haxe.Serializer.run({msg: "Don't let the smoke out!"})
    msg_out = loads("oy3:msgy32:Don't%20let%20the%20smoke%20out!g")["msg"]
    if msg != msg_out:
        raise AssertionError("Smoke test failed")
    print(msg_out)


if __name__ == "__main__":
    main()
