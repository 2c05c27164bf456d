# dmnd-proxy

Asyncio building blocks for a mining proxy that sits between SV1 miners and
an SV2 mining pool. The package keeps one health record for the proxy. It
runs the pool's connection setup exchange and the relays to and from the
pool. It also matches the pool's share acknowledgements to the shares that
were sent upstream.

It uses only the standard library.

## Modules

- `dmnd_proxy.hashrate` parses and formats hashrates with the units `T`, `P`
  and `E` (tera-, peta- and exahash per second). The functions are
  `parse_hashrate`, `format_hashrate` and `HashUnit.from_str`.
  `DEFAULT_HASHRATE` is 100T.
- `dmnd_proxy.proxy_state` holds the health record, `ProxyState`. It covers
  the pool, the template provider, job declaration, the share accounter, the
  translator, the downstream and upstream links, and an internal
  inconsistency code. The record is thread-safe. `global_state()` returns
  the process-wide instance.
- `dmnd_proxy.shared` provides:
  - `AbortOnDrop`, which owns an asyncio task and cancels it on `abort()`,
    on leaving a `with` block, or when it is garbage collected;
  - `sv1_rolling`, which limits a requested version-rolling mask to
    `0x1FFFE000`;
  - the `UserId` and `Sv1IngressError` types.
- `dmnd_proxy.task_manager` provides `TaskManager`, which holds relay tasks
  in a supervising task. The single aborter from `get_aborter()` cancels the
  supervising task and every task it holds.
- `dmnd_proxy.messages` holds the message dataclasses: `SetupConnection`,
  `SetupConnectionSuccess`, `SetupConnectionError`, `SubmitSharesExtended`,
  `SubmitSharesSuccess` and `ShareOk`. `ShareOk.job_id()` returns the upper
  32 bits of `ref_job_id`.
- `dmnd_proxy.pool_connection` provides:
  - `get_mining_setup_connection_msg`, which builds the setup message;
  - `mining_setup_connection`, which sends that message and waits for
    `SetupConnectionSuccess`, raising `PoolConnectionError` on a timeout or
    on an unexpected reply;
  - the `relay_up` and `relay_down` loops.
- `dmnd_proxy.share_accounter` does the following:
  - `start()` runs both share accounting relays under a `TaskManager`;
  - `relay_up` records each `SubmitSharesExtended` by job id;
  - `relay_down` turns a matching `ShareOk` into a `SubmitSharesSuccess`.
    An unknown job id, or a setup message on the mining connection, marks
    the pool down.
- `dmnd_proxy.config` provides:
  - `parse_args` for the options `--test`, `-d/--d`, `-l/--loglevel`,
    `-n/--nc`, `--delay` and `-i/--interval`;
  - `normalize_log_level` and `log_filter`;
  - `pool_address` and `auth_pub_key`, which give the main or the test
    endpoint.

## Channels

Relays take asyncio queues. Putting `None` on a queue means its sending side
has closed. A sink whose `put` raises counts as closed. A relay marks the
affected component down in the `ProxyState` it was given. If it was given
none, it uses `global_state()`.

## Hashrates

```python
from dmnd_proxy.hashrate import parse_hashrate, format_hashrate, HashUnit

rate = parse_hashrate("2.5P")      # 2.5e15 hashes per second
print(format_hashrate(rate))       # "2.50P"
print(format_hashrate(1e14))       # "100.00T"

HashUnit.from_str("e")             # HashUnit.EXA
parse_hashrate("10X")              # raises ValueError: invalid unit
```

## Proxy health

```python
from dmnd_proxy.proxy_state import ProxyState, PoolState, DownstreamType

state = ProxyState()
state.update_pool_state(PoolState.DOWN)
state.update_downstream_state(DownstreamType.TRANSLATOR_DOWNSTREAM)

down, description = state.is_proxy_down()
# (True, "Pool(Down), Downstream(Down([TranslatorDownstream]))")

state.update_proxy_state_up()
state.is_proxy_down()              # (False, None)
```

## Settings

```python
from dmnd_proxy.config import parse_args, pool_address, auth_pub_key

args = parse_args(["--test", "-d", "10T", "-l", "debug"])
args.expected_hashrate             # 1e13
pool_address(args.test)            # test pool endpoint
auth_pub_key(args.test)            # matching authority public key
```

`get_mining_setup_connection_msg` reads the `TOKEN` environment variable and
puts it in the device id of the setup message. It raises `RuntimeError` when
the variable is missing.

## What this package does not do

There is no command to run and no process that starts the proxy. The
package does not do the following:

- open TCP connections to the pool, or perform the encrypted handshake;
- encode or decode wire frames;
- listen for SV1 miners;
- translate between SV1 and SV2;
- serve a statistics API.

The relays and the setup exchange work on message objects passed through
asyncio queues that the caller supplies. `parse_args` only returns an `Args`
value.

## Running the tests

Install the package with its `test` extra, then run `pytest` from the project
directory.