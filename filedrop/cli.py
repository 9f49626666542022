import argparse
import logging

import uvicorn

from filedrop import config
from filedrop.main import app


def parse_args(argv=None) -> argparse.Namespace:
    env = config.Overrides.from_env()
    p = argparse.ArgumentParser(prog="filedrop", description="Minimal HTTP file upload service.")
    p.add_argument("--listen", default=env.listen_address,
                   help="the address to listen on for HTTP (overrides config option)")
    p.add_argument("--upload.path", dest="upload_path", default=env.upload_path,
                   help="the place to put uploaded files (overrides config option)")
    p.add_argument("--upload.url", dest="upload_url", default=env.upload_url,
                   help="the base url for the uploaded files (overrides config option)")
    p.add_argument("--remote-addr-header", dest="remote_addr_header", default=env.remote_addr_header,
                   help="header holding the client address behind a proxy (overrides config option)")
    p.add_argument("--config.path", dest="config_path", default=env.config_path,
                   help="path to the config file")
    p.add_argument("--log-level", default="info")
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config.set_overrides(
        config.Overrides(
            config_path=args.config_path,
            listen_address=args.listen,
            upload_path=args.upload_path,
            upload_url=args.upload_url,
            remote_addr_header=args.remote_addr_header,
        )
    )
    cfg = config.reload()
    host, port = config.split_listen_address(cfg.listen_address)

    uvicorn.run(app, host=host, port=port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
