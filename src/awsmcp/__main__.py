from awsmcp.cli import main

main()
