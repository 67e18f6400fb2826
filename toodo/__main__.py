from toodo.interfaces.cli.main import main

main()
