from quick_alias.cli import main

main()
