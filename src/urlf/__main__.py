from urlf.cli import main

main()
