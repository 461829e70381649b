from bsw.cli.app import main

main()
