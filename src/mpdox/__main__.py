from mpdox.cli import main

main()
